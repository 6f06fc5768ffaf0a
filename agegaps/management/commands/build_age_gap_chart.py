from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from agegaps.conf import get_setting
from agegaps.data_processing import tidy_couples
from agegaps.data_processing_charts import save_chart_png
from agegaps.data_processing_io import load_age_gaps, load_cleaned, write_cleaned_csv
from agegaps.data_processing_stats import summarize_age_gaps
from agegaps.publishing import build_interactive_chart, publish_chart, write_interactive_html


CLEANED_CSV = "age_gaps.csv"
CHART_PNG = "age_gaps.png"
CHART_HTML = "age_gaps.html"


class Command(BaseCommand):
    help = (
        "Download the Hollywood age gap data, write the cleaned CSV, render the "
        "static and interactive charts and upload the interactive one to Chart Studio."
    )

    def add_arguments(self, parser):
        parser.add_argument("--source", default=None, help="URL or path of the raw CSV (default: AGE_GAP_DATA_URL)")
        parser.add_argument("--output-dir", default=None, help="Where output files go (default: AGE_GAP_OUTPUT_DIR)")
        parser.add_argument("--skip-publish", action="store_true", help="Do not upload to Chart Studio")

    def handle(self, *args, **options):
        source = options["source"] or get_setting("AGE_GAP_DATA_URL")
        out_dir = Path(options["output_dir"] or get_setting("AGE_GAP_OUTPUT_DIR"))
        colors = get_setting("AGE_GAP_COLORS")
        title = get_setting("AGE_GAP_PLOT_TITLE")

        try:
            raw = load_age_gaps(source)
            cleaned = tidy_couples(raw, corrections=get_setting("AGE_GAP_NAME_CORRECTIONS"))
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        cleaned_path = write_cleaned_csv(cleaned, out_dir / CLEANED_CSV)

        # aggregates always come from the persisted file
        per_year = summarize_age_gaps(load_cleaned(cleaned_path))
        save_chart_png(per_year, out_dir / CHART_PNG, colors=colors, title=title)

        fig = build_interactive_chart(
            per_year,
            colors=colors,
            title=title,
            subtitle=get_setting("AGE_GAP_PLOT_SUBTITLE"),
            footer=get_setting("AGE_GAP_PLOT_FOOTER"),
        )
        write_interactive_html(fig, out_dir / CHART_HTML)

        if options["skip_publish"]:
            self.stdout.write(self.style.SUCCESS(f"Wrote outputs to {out_dir} (publishing skipped)"))
            return

        url = publish_chart(
            fig,
            title=title,
            username=get_setting("CHART_STUDIO_USERNAME"),
            api_key=get_setting("CHART_STUDIO_API_KEY"),
        )
        self.stdout.write(self.style.SUCCESS(f"Published {title} at {url}"))
