"""
Referral requests feature package.

Times referral asks to a contact and flags requests that are due for a
follow-up.
"""
