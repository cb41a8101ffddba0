from .tables import render_node_table, render_workload_table
from .json_export import export_json, write_json

__all__ = [
    "render_node_table",
    "render_workload_table",
    "export_json",
    "write_json",
]
