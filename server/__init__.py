"""HTTP transport for hosted Mus rooms."""
