
class Serializable:

    @classmethod
    def from_json(cls, obj):
        return cls(**obj)


    def to_dict(self):
        return dict(self.__dict__)


    def __str__(self):
        s = F'{type(self).__name__}('
        s += ', '.join(F'{k}={v}' for k, v in self.__dict__.items())
        s += ')'

        return s


    def __repr__(self):
        return str(self)
