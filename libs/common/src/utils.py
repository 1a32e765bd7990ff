"""
Utility Functions for the indicator engine
"""


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safe division that returns default on zero denominator"""
    if denominator == 0:
        return default
    return numerator / denominator
