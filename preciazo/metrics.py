"""Prometheus metrics for the extraction pipeline."""

from prometheus_client import Counter, Info

from preciazo import __version__

app_info = Info("preciazo", "Price observation pipeline info")
app_info.info({"version": __version__, "name": "preciazo"})

extractions_total = Counter(
    "extractions_total",
    "Total number of page extraction attempts",
    ["retailer", "status"],
)

extraction_errors_total = Counter(
    "extraction_errors_total",
    "Total number of failed page extractions",
    ["retailer", "error_type"],
)

observations_appended_total = Counter(
    "observations_appended_total",
    "Total number of observations appended to the store",
    ["retailer"],
)


def record_extraction(retailer: str, success: bool, error_type: str | None = None) -> None:
    """Record the outcome of one extraction."""
    extractions_total.labels(retailer=retailer, status="success" if success else "error").inc()
    if not success:
        extraction_errors_total.labels(
            retailer=retailer, error_type=error_type or "unknown"
        ).inc()
