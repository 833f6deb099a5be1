"""Services Layer - transactional facades returning ServiceResponse.

Invariants:
    - One UnitOfWork (one storage transaction) per public method
    - Services depend on core/ and the UnitOfWork protocol, never on SQLAlchemy
"""
