from newsdesk.pipeline.dedup import DedupLedger
from newsdesk.pipeline.pipeline import NewsPipeline, PipelineContext
from newsdesk.pipeline.recency import format_pub_age, is_fresh

__all__ = [
    "DedupLedger",
    "NewsPipeline",
    "PipelineContext",
    "format_pub_age",
    "is_fresh",
]
