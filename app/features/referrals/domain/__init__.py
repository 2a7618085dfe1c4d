"""
Domain subpackage for referral requests.
"""

from .models import FollowUpDecision, ReferralTimingInput, TimingSuggestion

__all__ = ["FollowUpDecision", "ReferralTimingInput", "TimingSuggestion"]
