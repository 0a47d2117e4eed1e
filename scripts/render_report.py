import pandas as pd
from plotly.subplots import make_subplots
import plotly.graph_objects as go
import sys
from pathlib import Path

if len(sys.argv) < 3:
    print("Usage: python render_report.py <per_fold.csv> <aggregate.csv> [output.html]")
    sys.exit(1)

per_fold_path = Path(sys.argv[1])
aggregate_path = Path(sys.argv[2])
for path in (per_fold_path, aggregate_path):
    if not path.exists():
        print(f"❌ File not found: {path}")
        sys.exit(1)

per_fold = pd.read_csv(per_fold_path)
aggregate = pd.read_csv(aggregate_path)

# Only scored pairs are plotted; failures are listed below the charts
scored = per_fold[per_fold["status"] == "ok"]
failed = per_fold[per_fold["status"] != "ok"]

fig = make_subplots(
    rows=2,
    cols=1,
    subplot_titles=[
        "Held-out Perplexity per Fold",
        "Mean Held-out Perplexity across Folds",
    ],
    vertical_spacing=0.15,
)

# Chart 1: one line per fold, fold trends differ
for fold, g in scored.groupby("fold"):
    fig.add_trace(
        go.Scatter(
            x=g["k"],
            y=g["score"],
            mode="lines+markers",
            name=f"Fold {fold}",
        ),
        row=1,
        col=1,
    )

# Chart 2: aggregate mean with fold spread
fig.add_trace(
    go.Scatter(
        x=aggregate["k"],
        y=aggregate["mean_perplexity"],
        error_y=dict(type="data", array=aggregate["std_perplexity"].fillna(0)),
        mode="lines+markers",
        name="Mean",
        marker_color="crimson",
    ),
    row=2,
    col=1,
)

fig.update_xaxes(title_text="Number of topics (k)", row=2, col=1)
fig.update_yaxes(title_text="Perplexity", row=1, col=1)
fig.update_yaxes(title_text="Perplexity", row=2, col=1)

fig.update_layout(
    height=900,
    title_text="📊 Cross-validated Perplexity by Number of Topics",
    margin=dict(t=60, b=40),
)

output_file = Path(sys.argv[3]) if len(sys.argv) > 3 else Path("reports/perplexity_cv.html")
output_file.parent.mkdir(parents=True, exist_ok=True)
fig.write_html(str(output_file), include_plotlyjs="cdn")
print(f"✅ Chart-based report saved to {output_file}")

if not failed.empty:
    print(f"⚠️ {len(failed)} (k, fold) pairs did not produce a score:")
    print(failed[["k", "fold", "status", "error_kind"]].to_string(index=False))
