"""GLSL templates that ship with shaderbuild."""
