"""HTTP cross-cutting helpers for the reference backend."""
