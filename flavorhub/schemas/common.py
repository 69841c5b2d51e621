from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool


def reject_null(value):
    """Field validator for columns that are optional in a PATCH body but NOT NULL in the table."""
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value
