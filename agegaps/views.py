from __future__ import annotations
import os

from django.http import HttpResponse
from django.shortcuts import render, redirect
from django.views.decorators.http import require_http_methods

from .conf import get_setting
from .forms import AgeGapSourceForm
from .report import build_report, ReportResult

@require_http_methods(["GET", "POST"])
def report_view(request):
    report: ReportResult | None = None

    if request.method == "POST":
        form = AgeGapSourceForm(request.POST, request.FILES)
        if form.is_valid():
            try:
                if form.cleaned_data["source"] == "upload":
                    f = form.cleaned_data["data_file"]
                    report = build_report(
                        file_bytes=f.read(),
                        filename=f.name,
                        corrections=get_setting("AGE_GAP_NAME_CORRECTIONS"),
                    )
                else:
                    report = build_report(
                        get_setting("AGE_GAP_DATA_URL"),
                        corrections=get_setting("AGE_GAP_NAME_CORRECTIONS"),
                    )
            except ValueError as exc:
                form.add_error(None, str(exc))
            else:
                request.session["cleaned_csv"] = report.cleaned_csv_bytes.decode("utf-8")
                request.session["source_name"] = report.source
    else:
        form = AgeGapSourceForm()

    return render(request, "agegaps/report.html", {"form": form, "report": report})

def download_cleaned_csv(request):
    csv_text = request.session.get("cleaned_csv")
    source_name = request.session.get("source_name", "age_gaps")
    if not csv_text:
        return redirect("report")

    base = os.path.basename(source_name.rstrip("/")) or "age_gaps"
    safe_base = base.rsplit(".", 1)[0] if "." in base else base
    filename = f"{safe_base}_cleaned.csv"

    resp = HttpResponse(csv_text, content_type="text/csv; charset=utf-8")
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp
