"""Shared utilities for the people pipeline."""

from people_pipeline.utils.io import read_export_file, write_output
from people_pipeline.utils.transforms import normalize_columns, merge_datasets
from people_pipeline.utils.validators import validate_dataframe
from people_pipeline.utils.types import DateRange, ReportSet
