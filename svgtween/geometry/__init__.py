"""Pure geometry helpers: cubic Bezier math and 2-D affine matrices."""
