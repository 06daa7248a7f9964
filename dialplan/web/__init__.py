"""HTTP service exposing telco expression matching and dial plan routing."""
