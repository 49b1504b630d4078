"""
Core math primitives, domain models and input contracts.

Fixed-point kernel, checked arithmetic, unit conversions and the pool
snapshot model. Nothing here depends on the curve pricing layer.
"""
