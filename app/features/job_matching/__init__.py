"""
Job matching feature.

Scores how well a user's profile fits a saved job posting.
"""
