"""Test doubles and in-memory document builders shared by both test trees."""

import io
import json
from typing import Any, Dict, List, Optional

import openpyxl
import requests

from core.providers import LLMProvider, LLMResponse


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def build_xlsx(sheets: Dict[str, List[List[Any]]]) -> bytes:
    """Build an .xlsx workbook with the given sheets (in order) and rows."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def build_pdf(page_texts: List[str]) -> bytes:
    """Assemble a minimal valid PDF with one Helvetica text line per page."""
    n_pages = len(page_texts)
    font_id = 3 + 2 * n_pages
    page_ids = [3 + 2 * i for i in range(n_pages)]

    objects: Dict[int, bytes] = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        2: (
            "<< /Type /Pages /Kids ["
            + " ".join(f"{pid} 0 R" for pid in page_ids)
            + f"] /Count {n_pages} >>"
        ).encode(),
        font_id: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    for pid, text in zip(page_ids, page_texts):
        stream = f"BT /F1 18 Tf 72 720 Td ({text}) Tj ET".encode()
        objects[pid] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Contents {pid + 1} 0 R "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> >>"
        ).encode()
        objects[pid + 1] = (
            f"<< /Length {len(stream)} >>\nstream\n".encode()
            + stream
            + b"\nendstream"
        )

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in sorted(objects):
        offsets[obj_id] = out.tell()
        out.write(f"{obj_id} 0 obj\n".encode() + objects[obj_id] + b"\nendobj\n")

    xref_offset = out.tell()
    size = max(objects) + 1
    out.write(f"xref\n0 {size}\n".encode())
    out.write(b"0000000000 65535 f \n")
    for obj_id in range(1, size):
        out.write(f"{offsets[obj_id]:010d} 00000 n \n".encode())
    out.write(
        f"trailer\n<< /Size {size} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n".encode()
    )
    return out.getvalue()


# ---------------------------------------------------------------------------
# Transport / provider fakes
# ---------------------------------------------------------------------------

def make_response(
    status_code: int,
    body: Any = None,
    text: Optional[str] = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    if body is not None:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = (text or "").encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeSession:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, response: Optional[requests.Response] = None, exc: Optional[Exception] = None):
        self.response = response
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeProvider(LLMProvider):
    """Records prompts; returns a canned response or raises a canned error."""

    provider_name = "fake"

    def __init__(self, response: Optional[LLMResponse] = None, exc: Optional[Exception] = None):
        self.response = response or LLMResponse(raw_text="  fake answer \n")
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    @property
    def invoked(self) -> bool:
        return bool(self.calls)

    def generate(self, prompt, *, api_key, config=None):
        self.calls.append({"prompt": prompt, "api_key": api_key, "config": config})
        if self.exc is not None:
            raise self.exc
        return self.response
