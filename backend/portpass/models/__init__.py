from .staff import Staff, SessionToken
from .passes import Transaction, Pass

__all__ = [
    'Staff', 'SessionToken',
    'Transaction', 'Pass',
]
