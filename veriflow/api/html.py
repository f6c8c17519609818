"""HTML debug page for the store contents."""

from __future__ import annotations

import json
from html import escape
from typing import Any

from veriflow.store.base import TableStore

CUSTOMER_COLUMNS = ["CustomerID", "FirstName", "LastName", "Email", "SignupDate"]
TRANSACTION_COLUMNS = ["TransactionID", "CustomerID", "Product", "Amount", "TransactionDate"]

PAGE_STYLE = """
      body { font-family: Arial, sans-serif; margin: 20px; }
      .table { border-collapse: collapse; width: 100%; margin: 20px 0; }
      .table th, .table td { border: 1px solid #ddd; padding: 8px; text-align: left; }
      .table th { background-color: #f2f2f2; }
      .section { margin: 30px 0; }
      .json { background-color: #f5f5f5; padding: 10px; border-radius: 4px; overflow-x: auto; }
      pre { white-space: pre-wrap; }"""


def _cell(value: Any) -> str:
    return "" if value is None else escape(str(value))


def render_table(rows: list[dict[str, Any]], columns: list[str]) -> str:
    """Render rows as an HTML table restricted to the given columns."""
    if not rows:
        return "<p>No data available</p>"
    head = "".join(f"<th>{escape(c)}</th>" for c in columns)
    body = "".join(
        "<tr>" + "".join(f"<td>{_cell(row.get(c))}</td>" for c in columns) + "</tr>"
        for row in rows
    )
    return f'<table class="table"><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>'


def render_views(views: dict[str, dict[str, Any]]) -> str:
    if not views:
        return ""
    items = "".join(
        f"<h3>View: {escape(name)}</h3>"
        f'<div class="json"><pre>{escape(view.get("definition") or "")}</pre></div>'
        f"<p><strong>Rows:</strong> {len(view.get('data') or [])}</p>"
        for name, view in views.items()
    )
    return f'<div class="section"><h2>Views ({len(views)})</h2>{items}</div>'


def render_database_page(store: TableStore, summary: dict[str, Any]) -> str:
    """Render the full debug page.

    Args:
        store: Loaded table store
        summary: Database summary as returned by ``GET /database``

    Returns:
        HTML document
    """
    customers = store.get("Customers")
    transactions = store.get("Transactions")
    summary_json = escape(json.dumps(summary, indent=2, default=str))
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>Veriflow Database Viewer</title>
    <style>{PAGE_STYLE}
    </style>
  </head>
  <body>
    <h1>Veriflow Database Viewer</h1>
    <p><strong>Database File:</strong> {escape(store.location)}</p>

    <div class="section">
      <h2>Database Summary</h2>
      <div class="json"><pre>{summary_json}</pre></div>
    </div>

    <div class="section">
      <h2>Customers Table ({len(customers)} rows)</h2>
      {render_table(customers, CUSTOMER_COLUMNS)}
    </div>

    <div class="section">
      <h2>Transactions Table ({len(transactions)} rows)</h2>
      {render_table(transactions, TRANSACTION_COLUMNS)}
    </div>

    {render_views(store.views)}

    <div class="section">
      <h2>API Usage</h2>
      <ul>
        <li><a href="/database">Full database summary (JSON)</a></li>
        <li><a href="/database?table=customers">Customers table</a></li>
        <li><a href="/database?table=transactions">Transactions table</a></li>
        <li><a href="/database?table=views">Views</a></li>
        <li><a href="/database?format=html">This HTML view</a></li>
      </ul>
    </div>
  </body>
</html>
"""


__all__ = ["render_database_page", "render_table"]
