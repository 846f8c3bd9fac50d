class RulekitError(Exception):
    """Base rule engine error."""


class RuleLoadError(RulekitError):
    def __init__(self, location: str, message: str) -> None:
        self.location = location
        self.message = message
        super().__init__(f"{message}: {location}")


class InvalidRuleDocumentError(RuleLoadError):
    def __init__(self, location: str, detail: str) -> None:
        self.detail = detail
        super().__init__(location=location, message=f"Invalid rule document ({detail})")


class RuleFetchError(RulekitError):
    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch rules ({detail}): {url}")


class CacheStoreError(RulekitError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Rule cache store unavailable ({detail})")
