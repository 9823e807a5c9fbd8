"""Geo Query Processing Modules

This package contains the query modules built on the dynamo_geo core
infrastructure (configuration, exceptions, logging and DynamoDB access).
"""
