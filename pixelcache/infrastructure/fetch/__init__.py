from .http_fetcher import HttpImageFetcher, RetryableStatusError

__all__ = ["HttpImageFetcher", "RetryableStatusError"]
