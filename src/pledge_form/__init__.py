"""Location lookup and step-gated validation core for the pledge registration form."""
