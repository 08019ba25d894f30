# Name:   caseenum.py
#
# Closed enumerations built by a metaclass: plain enums, raw-valued enums
# (int, str, single characters) with implicit values, enums whose members
# carry a payload, and a Switch that refuses to be built unless it covers
# every member.

import logging

__all__ = ['Enum', 'TypeEnum', 'IntEnum', 'StrEnum', 'CharEnum', 'DataEnum',
           'Switch', 'NonExhaustiveError']

log = logging.getLogger(__name__)

KWARG_ATTR_MAP = {'doc': '__doc__'}


def _is_dunder(name):
    return len(name) > 4 and name.startswith('__') and name.endswith('__')


class EnumStub:
    def __init__(self, basetype=None, value=None, name=None, kwargs={}):
        self._name = name
        self._basetype = basetype
        self._value = value
        self._kwargs = kwargs

    @property
    def _args(self):
        if self._basetype is None:
            return (self._name,)
        else:
            return (self._name, self._value)


class PlaceholderStub (EnumStub):
    def __call__(self, value=None, **kwargs):
        if self._basetype is None:
            if value is not None:
                raise TypeError("Cannot set a value for this type of enum")
            stub = PlaceholderStub(kwargs=kwargs)
        elif value is None:
            # Value is filled in by the enum class when it is built.
            stub = PlaceholderStub(self._basetype, kwargs=kwargs)
        else:
            value = self._basetype(value)
            stub = TypeEnumStub(self._basetype, value, kwargs=kwargs)
        return stub

    def __mul__(self, count):
        return (self.__class__(self._basetype, kwargs=self._kwargs)
                for x in range(count))

    def __rmul__(self, count):
        return self.__mul__(count)


class VariantStub (PlaceholderStub):
    def __call__(self, *types, **kwargs):
        for t in types:
            if not isinstance(t, type):
                raise TypeError("Payload types must be classes, not {!r}"
                                .format(t))
        return VariantStub(value=types, kwargs=kwargs)

    @property
    def _args(self):
        return (self._name, self._value or ())


class TypeEnumStub (EnumStub):
    def __getattribute__(self, attr):
        if attr not in ('_name', '_basetype', '_value', '_args', '_kwargs'):
            return getattr(self._value, attr)
        return object.__getattribute__(self, attr)

    def __setattr__(self, attr, value):
        if attr not in ('_name', '_basetype', '_value', '_args', '_kwargs'):
            return setattr(self._value, attr, value)
        return object.__setattr__(self, attr, value)


class EnumSetupDict (dict):
    def __init__(self, basetype=None, placeholder=PlaceholderStub):
        self.basetype = basetype
        self.placeholder = placeholder

    def __getitem__(self, item):
        if item == '__':
            return self.placeholder(self.basetype)
        return dict.__getitem__(self, item)

    def __setitem__(self, item, value):
        # Note: TypeEnumStubs will appear to be instances of the basetype due
        # to the fact that they mimic all attributes of their _value, so we
        # need to make sure to check for the stub case first.
        if isinstance(value, EnumStub):
            if not value._name:
                value._name = item
        elif self.basetype and isinstance(value, self.basetype):
            if not _is_dunder(item):
                value = TypeEnumStub(self.basetype, value, item)
        return dict.__setitem__(self, item, value)


class EnumType (type):
    @classmethod
    def __prepare__(meta, name, bases):
        return EnumSetupDict()

    def __new__(meta, name, bases, classdict):
        cls = type.__new__(meta, name, bases, dict(classdict))
        stubs = {}
        # Declaration order matters for implicit values.
        for attr, value in classdict.items():
            if isinstance(value, EnumStub):
                if not value._name:
                    value._name = attr
                if value in stubs or value._name != attr:
                    raise ValueError("Enum member {!r} is an alias of {!r}"
                                     .format(attr, value._name))
                delattr(cls, attr)
                stubs[value] = cls.new(*value._args, **value._kwargs)
        type.__setattr__(cls, '_closed', True)
        log.debug("Built enum %s with %d members", cls, len(stubs))
        return cls

    def __str__(cls):
        return "{}.{}".format(cls.__module__, cls.__qualname__)

    def __repr__(cls):
        return "<enum class: {}.{}>".format(cls.__module__, cls.__qualname__)

    def __setattr__(cls, attr, value):
        if cls.__dict__.get('_closed'):
            if cls._is_member(value) or cls._is_member(cls.__dict__.get(attr)):
                raise TypeError("Enum {} is closed; cannot set member {!r}"
                                .format(cls, attr))
        return type.__setattr__(cls, attr, value)

    def __delattr__(cls, attr):
        if cls.__dict__.get('_closed') and cls._is_member(cls.__dict__.get(attr)):
            raise TypeError("Enum {} is closed; cannot delete member {!r}"
                            .format(cls, attr))
        return type.__delattr__(cls, attr)

    def _is_member(cls, value):
        return isinstance(value, cls)

    def _matches(cls, member, value):
        return value is member

    def _payload(cls, value):
        return ()

    def new(cls, name, **kwargs):
        if cls.__dict__.get('_closed'):
            raise TypeError("Enum {} is closed; cannot add {!r}".format(cls, name))
        if cls.get(name) is not None:
            raise ValueError("Duplicate enum name: {!r}".format(name))
        elif hasattr(cls, name):
            raise ValueError("Invalid enum name: {!r}".format(name))
        self = object.__new__(cls)
        for k, v in kwargs.items():
            setattr(self, KWARG_ATTR_MAP.get(k, k), v)
        self.name = name
        setattr(cls, name, self)
        return self

    def get(cls, item, default=None):
        if isinstance(item, str):
            result = getattr(cls, item, None)
            if isinstance(result, Enum) and issubclass(cls, result.__class__):
                return result
        return default

    def get_value(cls, value, default=None):
        return cls.get(value, default)

    def __getitem__(cls, item):
        result = cls.get(item)
        if result is None:
            raise KeyError(item)
        return result

    def __contains__(cls, item):
        if cls._is_member(item):
            return cls.get(item.name) is item
        return cls.get(item) is not None

    def __iter__(cls):
        found = set()
        for c in cls.__mro__:
            if issubclass(type(c), EnumType):
                for attr, value in c.__dict__.items():
                    if attr not in found:
                        found.add(attr)
                        if isinstance(value, c) and value.name == attr:
                            yield value

    def __len__(cls):
        return sum(1 for member in cls)


class Enum (metaclass=EnumType):
    def __new__(cls, value):
        result = cls.get_value(value)
        if result is None:
            raise ValueError("No equivalent {} value: {!r}".format(cls, value))
        return result

    def __str__(self):
        return self.name

    def __repr__(self):
        return "<{}.{}>".format(self.__class__, self.name)


class TypeEnumType (EnumType):
    @classmethod
    def __prepare__(meta, name, bases, **kwargs):
        if 'basetype' in kwargs:
            basetype = kwargs['basetype']
            if basetype is None:
                # This is an "abstract" class.  Don't do the magic enum
                # processing.
                return dict()
        else:
            for b in bases:
                if isinstance(b, TypeEnumType):
                    basetype = b.basetype
                    if basetype is not None:
                        break
            else:
                raise TypeError("basetype not specified for TypeEnum subclass")
        return EnumSetupDict(basetype)

    def __new__(meta, name, bases, classdict, **kwargs):
        basetype = getattr(classdict, 'basetype', None)
        if basetype is not None:
            if basetype not in bases:
                bases = bases + (basetype,)
        classdict['basetype'] = basetype
        classdict['_value_map'] = {}
        cls = EnumType.__new__(meta, name, bases, classdict)
        return cls

    def __init__(meta, name, bases, classdict, **kwargs):
        EnumType.__init__(meta, name, bases, classdict)

    def __setattr__(cls, attr, value):
        if isinstance(value, cls) and not cls.__dict__.get('_closed'):
            cls._value_map.setdefault(value.value, attr)
        return EnumType.__setattr__(cls, attr, value)

    def new(cls, name, value=None, **kwargs):
        basetype = cls.basetype
        if basetype is None:
            raise TypeError("Cannot add members to abstract enum {}".format(cls))
        if value is None:
            value = cls._implicit_value(name)
        value = cls._check_value(basetype(value))
        self = basetype.__new__(cls, value)
        self._raw = value
        prev = cls.get(name)
        if prev is not None:
            raise ValueError("Duplicate enum name: {!r}".format(name))
        elif hasattr(cls, name):
            raise ValueError("Invalid enum name: {!r}".format(name))
        elif cls.get_value(value) is not None:
            raise ValueError("Duplicate enum value: {!r}".format(value))
        for k, v in kwargs.items():
            setattr(self, KWARG_ATTR_MAP.get(k, k), v)
        self.name = name
        setattr(cls, name, self)
        return self

    def get_value(cls, value, default=None):
        if isinstance(value, Enum) and not isinstance(value, cls):
            return default
        if isinstance(value, bool) and cls.basetype is not bool:
            return default
        for c in cls.__mro__:
            if issubclass(c, TypeEnum):
                try:
                    name = c._value_map.get(value)
                except TypeError:
                    # unhashable, so it can't be one of ours
                    return default
                if name:
                    return cls.get(name, default)
        return default


class TypeEnum (Enum, metaclass=TypeEnumType, basetype=None):
    def __repr__(self):
        return "<{}.{} ({!r})>".format(self.__class__, self.name, self.value)

    def __format__(self, spec):
        if not spec:
            return str(self)
        return format(self.value, spec)

    def __eq__(self, other):
        if isinstance(other, Enum) and other is not self:
            return False
        return self.basetype.__eq__(self, other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.value)

    @property
    def value(self):
        return self._raw

    @classmethod
    def _implicit_value(cls, name):
        raise TypeError("Must set a value for member {!r} of {}"
                        .format(name, cls))

    @classmethod
    def _check_value(cls, value):
        return value


class IntEnum (TypeEnum, basetype=int):
    @classmethod
    def _implicit_value(cls, name):
        for c in cls.__mro__:
            values = c.__dict__.get('_value_map')
            if values:
                return next(reversed(values)) + 1
        return 0


class StrEnum (TypeEnum, basetype=str):
    @classmethod
    def _implicit_value(cls, name):
        return name


class CharEnum (TypeEnum, basetype=str):
    @classmethod
    def _check_value(cls, value):
        if len(value) != 1:
            raise ValueError("{} values must be a single character, not {!r}"
                             .format(cls, value))
        return value


class DataEnumType (EnumType):
    @classmethod
    def __prepare__(meta, name, bases):
        return EnumSetupDict(placeholder=VariantStub)

    def _is_member(cls, value):
        return (isinstance(value, DataEnumType) and value is not cls
                and issubclass(value, cls) and value.__dict__.get('_variant', False))

    def _matches(cls, member, value):
        return isinstance(value, member)

    def _payload(cls, value):
        return value.payload

    def new(cls, name, types=(), fields=None, **kwargs):
        if cls.__dict__.get('_closed'):
            raise TypeError("Enum {} is closed; cannot add {!r}".format(cls, name))
        if cls.get(name) is not None:
            raise ValueError("Duplicate enum name: {!r}".format(name))
        elif hasattr(cls, name):
            raise ValueError("Invalid enum name: {!r}".format(name))
        if fields is None:
            fields = tuple('arg{}'.format(i) for i in range(len(types)))
        fields = tuple(fields)
        if len(fields) != len(types):
            raise TypeError("{} field names given for {} payload values"
                            .format(len(fields), len(types)))
        namespace = {
            '__module__': cls.__module__,
            '__qualname__': '{}.{}'.format(cls.__qualname__, name),
            '__match_args__': fields,
            '_types': tuple(types),
            '_variant': True,
            '_closed': True,
            'name': name,
        }
        for i, field in enumerate(fields):
            if field in namespace or field == 'payload' or hasattr(cls, field):
                raise ValueError("Invalid field name: {!r}".format(field))
            namespace[field] = property(lambda self, i=i: self.payload[i])
        for k, v in kwargs.items():
            namespace[KWARG_ATTR_MAP.get(k, k)] = v
        # Bypass DataEnumType.__new__: a variant has no members of its own.
        variant = type.__new__(type(cls), name, (cls,), namespace)
        setattr(cls, name, variant)
        return variant

    def get(cls, item, default=None):
        if isinstance(item, str):
            result = getattr(cls, item, None)
            if cls._is_member(result):
                return result
        return default

    def __contains__(cls, item):
        if cls._is_member(item):
            return cls.get(item.__name__) is item
        return cls.get(item) is not None

    def __iter__(cls):
        found = set()
        for c in cls.__mro__:
            if isinstance(c, DataEnumType):
                for attr, value in c.__dict__.items():
                    if attr not in found:
                        found.add(attr)
                        if c._is_member(value) and value.__name__ == attr:
                            yield value


class DataEnum (Enum, metaclass=DataEnumType):
    _types = None

    def __new__(cls, *payload):
        if cls._types is None:
            raise TypeError("Cannot instantiate {} directly; use one of its "
                            "variants".format(cls))
        if len(payload) != len(cls._types):
            raise TypeError("{} takes {} payload values ({} given)"
                            .format(cls, len(cls._types), len(payload)))
        for t, v in zip(cls._types, payload):
            if not isinstance(v, t) or (isinstance(v, bool) and t is not bool):
                raise TypeError("{} expected {}, got {!r}"
                                .format(cls, t.__name__, v))
        self = object.__new__(cls)
        object.__setattr__(self, 'payload', tuple(payload))
        return self

    def __setattr__(self, attr, value):
        raise AttributeError("{} values are immutable".format(self.__class__))

    def __delattr__(self, attr):
        raise AttributeError("{} values are immutable".format(self.__class__))

    def __getitem__(self, index):
        return self.payload[index]

    def __iter__(self):
        return iter(self.payload)

    def __eq__(self, other):
        if isinstance(other, DataEnum):
            return type(self) is type(other) and self.payload == other.payload
        return NotImplemented

    def __hash__(self):
        return hash((type(self), self.payload))

    def __str__(self):
        if not self.payload:
            return self.name
        return "{}({})".format(self.name, ", ".join(repr(v) for v in self.payload))

    def __repr__(self):
        return "<{}{!r}>".format(self.__class__, self.payload)


class NonExhaustiveError (TypeError):
    def __init__(self, enumtype, missing):
        self.enumtype = enumtype
        self.missing = list(missing)
        names = ", ".join(_member_name(m) for m in self.missing)
        TypeError.__init__(self, "Switch over {} must be exhaustive; missing: {}"
                           .format(enumtype, names))


def _member_name(member):
    if isinstance(member, type):
        return member.__name__
    return getattr(member, 'name', repr(member))


class Switch:
    """Pick one handler per enum member.

    `cases` maps a member (or payload variant, or a tuple of them) to a
    handler, either as a dict or as a sequence of pairs.  Coverage is checked
    here, so a Switch missing a member and lacking a `default` never gets
    built.  Branches are tried in the order given and the first match wins.

    Handlers for plain members are called with no arguments, handlers for
    payload variants get the payload as positional arguments, and `default`
    gets the value itself.
    """

    def __init__(self, enumtype, cases, default=None):
        if not isinstance(enumtype, EnumType):
            raise TypeError("{!r} is not an enum class".format(enumtype))
        self.enumtype = enumtype
        self.default = default
        self.branches = []
        covered = []
        if hasattr(cases, 'items'):
            cases = cases.items()
        for pattern, handler in cases:
            members = pattern if isinstance(pattern, tuple) else (pattern,)
            for m in members:
                if not enumtype._is_member(m) or m not in enumtype:
                    raise TypeError("{!r} is not a member of {}"
                                    .format(m, enumtype))
                if any(m is c for c in covered):
                    log.warning("Unreachable case %s in switch over %s",
                                _member_name(m), enumtype)
                else:
                    covered.append(m)
            self.branches.append((members, handler))
        missing = [m for m in enumtype if not any(m is c for c in covered)]
        if missing and default is None:
            raise NonExhaustiveError(enumtype, missing)

    def __call__(self, value):
        enumtype = self.enumtype
        if not isinstance(value, enumtype):
            raise TypeError("Expected a {} value, got {!r}".format(enumtype, value))
        for members, handler in self.branches:
            for m in members:
                if enumtype._matches(m, value):
                    return handler(*enumtype._payload(value))
        if self.default is None:
            raise NonExhaustiveError(enumtype, [value])
        return self.default(value)
