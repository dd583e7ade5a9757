from mirrorlist.jobs.runner import RunConfig, RunSummary, run_job

__all__ = ["RunConfig", "RunSummary", "run_job"]
