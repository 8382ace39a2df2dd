from archforge.ir.architecture import FeatureFlags
from archforge.ir.validation import ValidationResult
from archforge.pipeline.stage import PipelineStage


REALTIME_KEYWORDS = ("realtime", "chat", "live", "socket")
HEAVY_DATA_KEYWORDS = ("analytics", "ai", "video", "big data")
ALERT_KEYWORDS = ("alert", "threshold", "notification")


def _mentions(text: str, keywords) -> bool:
    return any(word in text for word in keywords)


def classify(description: str) -> FeatureFlags:
    """
    Derives feature flags by plain substring containment on the lower-cased text.
    No tokenization: "ai" also matches inside "maintain".
    """
    text = (description or "").lower()

    return FeatureFlags(
        realtime=_mentions(text, REALTIME_KEYWORDS),
        heavy_data=_mentions(text, HEAVY_DATA_KEYWORDS),
        alerts=_mentions(text, ALERT_KEYWORDS),
    )


class ClassificationStage(PipelineStage):
    name = "classification"

    def run(self, context):
        context.flags = classify(context.request.description)
        return ValidationResult.success()
