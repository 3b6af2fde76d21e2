"""Car showroom: partner storefronts and vehicle margin pricing."""
