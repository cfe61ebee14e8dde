from decimal import Decimal
from sqlalchemy.orm import class_mapper


def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a dictionary suitable for activity log details."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Convert datetime objects to ISO format strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        # Money stays exact
        elif isinstance(value, Decimal):
            value = str(value)
        # Convert enum types to strings
        elif hasattr(value, 'name'):
            value = value.name
        result[c.key] = value
    return result


__all__ = ['sqlalchemy_to_dict']
