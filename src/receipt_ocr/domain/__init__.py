"""Receipt record types, media-type sniffing and schema coercion."""
