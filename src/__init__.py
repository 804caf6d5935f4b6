"""
Card Decision Engine - Credit-Card Application Scoring Service

A FastAPI-based service that scores credit-card applications across
eligibility, affordability and compliance modules and returns a decision,
risk level and credit limit.
"""

__version__ = "0.1.0"
