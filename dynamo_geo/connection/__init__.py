"""
Connection module for the DynamoDB Geo Query system.

This module provides DynamoDB table connectivity and geo index validation.
"""

from .dynamodb_connector import DynamoDBConnector

__all__ = [
    'DynamoDBConnector',
]
