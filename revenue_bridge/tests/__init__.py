'''
Revenue Bridge Test Suite

Test Modules:
-------------
- test_prng.py: FNV-1a vectors, mulberry32 determinism and ranges
- test_periods.py: Period key parsing and month arithmetic
- test_numeric_formatting.py: Division guards and display formatting
- test_period_generator.py: Single-period bands and bridge invariants
- test_aggregator.py: Cumulative roll-up, residual recomputation, M-suffixes
- test_insights.py: Insight rules, padding and merging
- test_revenue_data.py: Public entry point determinism, invariants, fallback
- test_dashboard.py: KPI cards, waterfall, driver table, drill-down
- test_api.py: Route handlers called directly
- test_config.py: Settings defaults and environment overrides

Running Tests:
--------------
    pip install -e ".[test]"
    pytest revenue_bridge/tests -v
'''

__all__ = []
