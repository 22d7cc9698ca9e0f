"""Input/output helpers of hbtune."""
