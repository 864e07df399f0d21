"""Built-in pixel-image operations.

Each module here defines a module-level `operation` (see
pixel_image.core.types.Operation) and its docstring is the text shown by
`pixel-image help <name>`. BUILTIN names the modules that ship with the
package; pixel_image.registry also registers any other module placed in
this directory.
"""

BUILTIN = ('absdiff', 'blend', 'info', 'invert', 'pad', 'scale')
