"""Library layer: resource lookup and HTTP transport."""
