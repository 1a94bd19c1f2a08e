"""Business rules on top of the ORM models."""
