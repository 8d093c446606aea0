"""HTTP value types: headers, request, response."""
