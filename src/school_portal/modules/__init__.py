"""
Feature modules. Each module keeps its models, schemas, repository,
service and routers together.
"""
