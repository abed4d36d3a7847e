"""
Streaming Classifier

Decides whether a request targets live media. The verdict only changes
caching/connection headers, so the matcher favours false positives.
"""

from liveproxy.domain.policy import DEFAULT_POLICY, ProxyPolicy


class StreamingClassifier:
    """Classifies a target URL / request content type as streaming or not"""

    def __init__(self, policy: ProxyPolicy = DEFAULT_POLICY):
        self.policy = policy

    def matches_url(self, target_url: str) -> bool:
        return any(pattern.search(target_url) for pattern in self.policy.streaming_url_patterns)

    def matches_content_type(self, content_type: str) -> bool:
        if not content_type:
            return False
        return any(marker in content_type for marker in self.policy.streaming_content_types)

    def classify(self, target_url: str, content_type: str = "") -> bool:
        """
        Classify a request

        Args:
            target_url: Absolute target URL
            content_type: Content-Type declared by the caller's request

        Returns:
            bool: True for streaming traffic
        """
        return self.matches_url(target_url) or self.matches_content_type(content_type)
