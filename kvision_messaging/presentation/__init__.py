"""
Presentation Layer - HTTP interface to the messaging core.

This layer contains:
- api/: FastAPI routers (thin: request → command/query → DTO)
- dependencies/: FastAPI dependencies (service JWT authentication)
"""
