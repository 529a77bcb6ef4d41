"""Guard for destructive endpoints"""

from fastapi import HTTPException


def require_confirmation(confirm: bool, what: str) -> None:
    """Deletes only go through with an explicit confirm flag"""
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail=f"Deleting this {what} must be confirmed (confirm=true)",
        )
