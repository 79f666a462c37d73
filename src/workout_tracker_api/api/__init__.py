"""HTTP API for the workout tracker."""
