import plotly.graph_objects as go

from axsim import ScanConfiguration, grand_spectrum, run_scan

# one trial over a 0.2 MHz band and its stacked spectrum
cfg = ScanConfiguration(scan_low=749.9, scan_high=750.1, num_trials=1)
res = run_scan(cfg, seed=7)

print("=== Grand spectrum demo ===")
f_true = res.trials[0]
print(f"f_true: {f_true:.6f} MHz")
print(f"windows: {len(res)}, with signal: {len(res.covering_windows(0))}")

sig = grand_spectrum(res, 0, field="signal")
mea = grand_spectrum(res, 0, field="measured")

fig = go.Figure()
fig.add_scatter(x=mea["freq"], y=mea["mean"], mode="lines", name="Measured (mean)")
fig.add_scatter(x=sig["freq"], y=sig["mean"], mode="lines", name="Injected signal (mean)")
fig.add_vline(x=f_true, line_dash="dash")
fig.update_layout(
    title="Grand spectrum (demo)", xaxis_title="Frequency (MHz)", yaxis_title="Power (1e-22 W)"
)
fig.write_html("demo_output.html", include_plotlyjs="cdn")
print("\nWrote demo_output.html (open in browser).")
