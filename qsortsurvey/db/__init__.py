from qsortsurvey.db.database import async_session_factory, init_db
from qsortsurvey.db.operations import (
    add_submission_records,
    get_last_submit_number,
    get_submission_records,
    submission_record_to_model,
)

__all__ = [
    "add_submission_records",
    "async_session_factory",
    "get_last_submit_number",
    "get_submission_records",
    "init_db",
    "submission_record_to_model",
]
