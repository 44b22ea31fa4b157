"""
scoring/ - Lawyer scoring

Modules:
    utils.py          - Decimal rounding, clamping and mean helpers
    lawyer_scorer.py  - Weighted, normalized lawyer score
"""
