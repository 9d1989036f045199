"""Command line and desktop front-ends for the expense tracker."""
