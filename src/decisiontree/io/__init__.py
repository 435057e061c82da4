from .errors import LoaderError
from .file_spec import JobFileSpec
from .job_loader import Job, load_job

__all__ = ["Job", "JobFileSpec", "LoaderError", "load_job"]
