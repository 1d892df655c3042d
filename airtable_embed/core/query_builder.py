"""
Request building logic for the core module.

Turns a checked parameter set into the path (and query string) appended to
`{api_url}/{base_id}/` when calling the Airtable API.
"""

from urllib.parse import quote_plus


class RequestBuilder:
    """Builds Airtable request paths, capping table queries at `max_records`."""

    def __init__(self, max_records: int):
        self.max_records = max_records

    def build_record_request(self, parameters: dict) -> str:
        """Path of a single record: `{table}/{record-id}`."""
        return f"{parameters['table']}/{quote_plus(parameters['record-id'])}"

    def get_max_records(self, requested) -> int:
        """
        Number of records to ask for.

        The requested value is used as long as it is a positive integer not
        above the configured ceiling, the ceiling is used otherwise.
        """
        try:
            requested = int(str(requested).strip())
        except (TypeError, ValueError):
            return self.max_records
        if requested < 1:
            return self.max_records
        return min(requested, self.max_records)

    def build_table_request(self, parameters: dict) -> str:
        """
        Path and query string of a table query.

        Fields are requested in the order they were written, e.g.
        `tblX?fields[]=Name&fields[]=Age&maxRecords=20&sort[0][direction]=asc`
        """
        query = [f"fields[]={quote_plus(field)}" for field in parameters["fields"]]
        if parameters.get("where"):
            query.append(f"filterByFormula={quote_plus(parameters['where'])}")
        query.append(f"maxRecords={self.get_max_records(parameters.get('max-records'))}")
        if parameters.get("order-by"):
            query.append(f"sort[0][field]={quote_plus(parameters['order-by'])}")
        query.append(f"sort[0][direction]={parameters.get('order') or 'asc'}")
        return f"{parameters['table']}?{'&'.join(query)}"
