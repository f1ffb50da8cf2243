''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. Frames on
    the wire and configuration files both go through here.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available. With
# the right build process this could be determined at build time, instead
# of at run time.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. To
# maintain alignment all 'dumps' methods need to do so as well.

def json_dumps(*args, **kwargs):
    kwargs.setdefault('separators', (',', ':'))
    return json.dumps(*args, **kwargs).encode()


# Each library raises its own exception type for malformed input; the
# callers only care that decoding failed. All of them are ValueError
# subclasses except for msgspec.

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = (ValueError, msgspec.DecodeError)
    EncodeError = (TypeError, msgspec.EncodeError)
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = (ValueError,)
    EncodeError = (TypeError,)
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = (ValueError,)
    EncodeError = (TypeError, ValueError)


def dumps_text(thing):
    """ Same as :func:`dumps`, but return a string instead of bytes.
    """

    return dumps(thing).decode()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
