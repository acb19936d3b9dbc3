"""
Schemas module - Request/Response schemas for API endpoints, plus the
CompanyDocument model every stored company is validated against.
"""
