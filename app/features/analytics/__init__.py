"""
Job search analytics feature.

Pipeline KPIs, conversion rates and the dashboard summary computed from a
user's saved jobs, status changes, interviews and offers.
"""
