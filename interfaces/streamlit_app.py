"""
Streamlit web interface for the option sweep toolkit.

Interactive UI with tabs for:
- European pricing and put-call parity
- Single-parameter sweeps (European or perpetual American)
- Finite-difference Greeks convergence
"""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from optsweep.analysis.greeks import GreeksAnalyzer
from optsweep.analysis.sweep import ParameterSweepMatrix, ParameterVector
from optsweep.core.european import EuropeanOption
from optsweep.core.perpetual import PerpetualAmericanOption

st.set_page_config(page_title="Option Sweep Toolkit", layout="wide")

st.title("Option Sweep Toolkit")
st.markdown("Closed-form pricing, Greeks and single-parameter sensitivity sweeps")

# Sidebar parameters
st.sidebar.header("Option Parameters")
S = st.sidebar.number_input("Spot Price (S)", value=60.0, min_value=0.01)
K = st.sidebar.number_input("Strike Price (K)", value=65.0, min_value=0.01)
T = st.sidebar.slider("Time to Expiry (years)", 0.01, 5.0, 0.25)
r = st.sidebar.slider("Risk-Free Rate (%)", 0.0, 20.0, 8.0) / 100
b = st.sidebar.slider("Cost of Carry (%)", -10.0, 20.0, 8.0) / 100
sig = st.sidebar.slider("Volatility (%)", 1.0, 200.0, 30.0) / 100
q = st.sidebar.slider("Dividend Yield (%)", 0.0, 10.0, 0.0) / 100

european = EuropeanOption(K=K, T=T, r=r, b=b, sig=sig, q=q)
perpetual = PerpetualAmericanOption(K=K, r=r, b=b, sig=sig, q=q)

tab1, tab2, tab3 = st.tabs(["Pricing & Parity", "Parameter Sweep", "Greeks Convergence"])

with tab1:
    st.header("European Option Valuation")
    report = european.parity_report(S)

    col1, col2 = st.columns(2)
    with col1:
        st.metric(label="Call Price", value=f"{report.call_price:.4f}")
        st.caption(report.call_internal.message)
    with col2:
        st.metric(label="Put Price", value=f"{report.put_price:.4f}")
        st.caption(report.put_internal.message)

    if report.is_valid:
        st.success("Put-call parity holds for both pricers")
    else:
        st.error("Put-call parity violated")

    st.subheader("Perpetual American Option")
    perp = perpetual.sweep_spot([S])
    st.table(pd.DataFrame({"Side": ["Call", "Put"], "Price": [perp.calls[0], perp.puts[0]]}))

with tab2:
    st.header("Single-Parameter Sweep")

    style = st.radio("Option style", ["European", "Perpetual American"], horizontal=True)
    option = european if style == "European" else perpetual
    base = ParameterVector.from_option(S, option)

    field = st.selectbox("Parameter", list(base.as_dict().keys()))
    index = base.index_of(field)
    end = st.number_input("End value", value=float(base[index]) * 1.5 or 1.0)
    steps = st.slider("Steps", 1, 50, 10)

    matrix = ParameterSweepMatrix(option, S, index, end, steps)
    prices = matrix.price_all()
    x = matrix.swept_values()

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=x, y=prices.calls, name="Call"))
    fig.add_trace(go.Scatter(x=x, y=prices.puts, name="Put", line=dict(color="orange")))
    fig.update_layout(title=f"Price vs {field}", xaxis_title=field, yaxis_title="Price")
    st.plotly_chart(fig, use_container_width=True)

    if style == "European":
        greeks = matrix.price_all_greeks()
        fig_greeks = go.Figure()
        fig_greeks.add_trace(go.Scatter(x=x, y=greeks.call_delta, name="Call Delta"))
        fig_greeks.add_trace(go.Scatter(x=x, y=greeks.put_delta, name="Put Delta"))
        fig_greeks.add_trace(go.Scatter(x=x, y=greeks.gamma, name="Gamma", yaxis="y2"))
        fig_greeks.update_layout(
            title=f"Delta and Gamma vs {field}",
            xaxis_title=field,
            yaxis=dict(title="Delta"),
            yaxis2=dict(title="Gamma", overlaying="y", side="right"),
        )
        st.plotly_chart(fig_greeks, use_container_width=True)

    st.dataframe(pd.concat([matrix.to_frame(), prices.to_frame()], axis=1))

with tab3:
    st.header("Finite-Difference Convergence")
    iterations = st.slider("Rounds (h → h²)", 1, 4, 3)
    comparisons = GreeksAnalyzer(european).compare_at(S, iterations)
    st.table(pd.DataFrame([
        {
            "h": c.h,
            "Call Delta Error": c.call_delta_error,
            "Call Gamma Error": c.call_gamma_error,
            "Put Delta Error": c.put_delta_error,
            "Put Gamma Error": c.put_gamma_error,
        }
        for c in comparisons
    ]))
