"""Services: change detection, job scoping and pipeline generation."""
