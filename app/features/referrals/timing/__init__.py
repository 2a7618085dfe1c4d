from .service import calculate_optimal_referral_timing, should_follow_up

__all__ = ["calculate_optimal_referral_timing", "should_follow_up"]
