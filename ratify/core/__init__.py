"""Core services: JSON stores for recommendations and ratings, Spotify access."""
from ratify.core.rating_store import RatingExists, RatingNotFound
from ratify.core.recommendation_store import InvalidRecommendation, RecommendationNotFound

__all__ = ["InvalidRecommendation", "RatingExists", "RatingNotFound", "RecommendationNotFound"]
