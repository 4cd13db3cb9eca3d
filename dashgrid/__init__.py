"""dashgrid — layout engine for interactive grid dashboards.

Packages:

  config  Engine-wide rules (snap threshold, search caps, timers).
  layout  Grid model, snapping, placement, auto-arrange, space-making,
          animation bookkeeping and the session-owned LayoutEngine.
"""
