"""Pure program engine: schedule generation, forecasts and TM trends."""
