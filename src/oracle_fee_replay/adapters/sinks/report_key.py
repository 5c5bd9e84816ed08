from ...domain.models import Report

def report_name(report: Report) -> str:
    """One document per run, keyed by the run timestamp."""
    return report.generated_at.strftime("%Y-%m-%dT%H%M%SZ") + ".json"
