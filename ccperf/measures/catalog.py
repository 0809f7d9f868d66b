# ccperf/measures/catalog.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Mapping, NamedTuple

from ccperf.measures.estimation import EstimationKind
from ccperf.model.info import CenterInfo
from ccperf.model.shape import ColumnKind, RowKind
from ccperf.utils.errors import NotFoundError


class _Def(NamedTuple):
    description: str
    estimation: EstimationKind
    row_kind: RowKind
    column_kind: ColumnKind
    is_percentage: bool
    is_time: bool
    zero_over_zero: float


_EXP = EstimationKind.EXPECTATION
_FOE = EstimationKind.FUNCTION_OF_EXPECTATIONS
_EOF = EstimationKind.EXPECTATION_OF_FUNCTION
_RAW = EstimationKind.RAW_STATISTIC

_CT = RowKind.CONTACT_TYPE
_IN = RowKind.INBOUND_TYPE
_AWT = RowKind.INBOUND_TYPE_AWT
_OUT = RowKind.OUTBOUND_TYPE
_CTG = RowKind.CONTACT_TYPE_AGENT_GROUP
_AWTG = RowKind.INBOUND_TYPE_AWT_AGENT_GROUP
_WQ = RowKind.WAITING_QUEUE
_AG = RowKind.AGENT_GROUP

_MP = ColumnKind.MAIN_PERIOD
_GC = ColumnKind.AGENT_GROUP
_SC = ColumnKind.SINGLE_COLUMN


def _d(description, estimation, row, column=_MP, percent=False, time=False, zoz=0.0) -> _Def:
    return _Def(description, estimation, row, column, percent, time, float(zoz))


class MeasureType(Enum):
    """
    MeasureType (CLOSED CATALOG)

    Binds each performance measure to:
      - a row kind and a column kind (matrix shape)
      - an estimation kind (point estimate / CI formula)
      - flags: percentage, time-valued, value of 0/0

    Members are persisted by name; deprecated names resolve through lookup().
    """

    ABANDONMENTRATIO = _d("Abandonment ratio", _FOE, _CT, percent=True)
    ABANDONMENTRATIOAFTERAWT = _d("Abandonment ratio after AWT", _FOE, _AWT, percent=True)
    ABANDONMENTRATIOBEFOREAWT = _d("Abandonment ratio before AWT", _FOE, _AWT, percent=True)
    ABANDONMENTRATIOREP = _d("Abandonment ratio (average of ratios)", _EOF, _CT, percent=True)
    AVGBUSYAGENTS = _d("Time-average number of busy agents", _EXP, _AG)
    AVGQUEUESIZE = _d("Time-average queue size", _EXP, _WQ)
    AVGSCHEDULEDAGENTS = _d("Time-average number of scheduled agents", _EXP, _AG)
    AVGWORKINGAGENTS = _d("Time-average number of working agents", _EXP, _AG)
    BLOCKRATIO = _d("Blocking ratio", _FOE, _CT, percent=True)
    BLOCKRATIOREP = _d("Blocking ratio (average of ratios)", _EOF, _CT, percent=True)
    BUSYAGENTSENDSIM = _d("Number of busy agents at end of simulation", _RAW, _AG, _SC)
    DELAYRATIO = _d("Delay ratio", _FOE, _CT, percent=True)
    DELAYRATIOREP = _d("Delay ratio (average of ratios)", _EOF, _CT, percent=True)
    EXCESSTIME = _d("Excess time", _FOE, _AWT, time=True)
    EXCESSTIMEABANDONED = _d("Excess time of abandoned contacts", _FOE, _AWT, time=True)
    EXCESSTIMEABANDONEDREP = _d("Excess time of abandoned contacts (average of ratios)", _EOF, _AWT, time=True)
    EXCESSTIMEREP = _d("Excess time (average of ratios)", _EOF, _AWT, time=True)
    EXCESSTIMESERVED = _d("Excess time of served contacts", _FOE, _AWT, time=True)
    EXCESSTIMESERVEDREP = _d("Excess time of served contacts (average of ratios)", _EOF, _AWT, time=True)
    MAXBUSYAGENTS = _d("Maximal number of busy agents", _EXP, _AG)
    MAXQUEUESIZE = _d("Maximal queue size", _EXP, _WQ)
    MAXWAITINGTIME = _d("Maximal waiting time", _EXP, _CT, time=True)
    MAXWAITINGTIMEG = _d("Maximal waiting time per agent group", _EXP, _CTG, time=True)
    MAXWAITINGTIMEABANDONED = _d("Maximal waiting time of abandoned contacts", _EXP, _CT, time=True)
    MAXWAITINGTIMESERVED = _d("Maximal waiting time of served contacts", _EXP, _CT, time=True)
    MAXWAITINGTIMESERVEDG = _d("Maximal waiting time of served contacts per agent group", _EXP, _CTG, time=True)
    OCCUPANCY = _d("Agents' occupancy ratio", _FOE, _AG, percent=True)
    OCCUPANCY2 = _d("Agents' occupancy ratio (working agents)", _FOE, _AG, percent=True)
    OCCUPANCY2REP = _d("Agents' occupancy ratio (working agents, average of ratios)", _EOF, _AG, percent=True)
    OCCUPANCYREP = _d("Agents' occupancy ratio (average of ratios)", _EOF, _AG, percent=True)
    QUEUESIZEENDSIM = _d("Queue size at end of simulation", _RAW, _WQ, _SC)
    RATEOFABANDONMENT = _d("Rate of abandonment", _EXP, _CT)
    RATEOFABANDONMENTAFTERAWT = _d("Rate of abandonment after AWT", _EXP, _AWT)
    RATEOFABANDONMENTBEFOREAWT = _d("Rate of abandonment before AWT", _EXP, _AWT)
    RATEOFARRIVALS = _d("Arrival rate", _EXP, _CT)
    RATEOFARRIVALSIN = _d("Arrival rate of inbound contacts", _EXP, _IN)
    RATEOFBLOCKING = _d("Rate of blocking", _EXP, _CT)
    RATEOFDELAY = _d("Rate of delayed contacts", _EXP, _CT)
    RATEOFINTARGETSL = _d("Rate of contacts served within AWT", _EXP, _AWT)
    RATEOFOFFERED = _d("Rate of offered contacts", _EXP, _CT)
    RATEOFSERVICES = _d("Rate of services", _EXP, _CT)
    RATEOFSERVICESAFTERAWT = _d("Rate of services after AWT", _EXP, _AWT)
    RATEOFSERVICESBEFOREAWT = _d("Rate of services before AWT", _EXP, _AWT)
    RATEOFSERVICESG = _d("Rate of services per agent group", _EXP, _CTG)
    RATEOFTRIEDOUTBOUND = _d("Rate of tried outbound contacts", _EXP, _OUT)
    RATEOFWRONGPARTYCONNECT = _d("Rate of wrong party connects", _EXP, _OUT)
    SERVEDRATES = _d("Served rates per contact type and agent group", _EXP, _CT, _GC)
    SERVICELEVEL = _d("Service level", _FOE, _AWT, percent=True, zoz=1)
    SERVICELEVELREP = _d("Service level (average of ratios)", _EOF, _AWT, percent=True, zoz=1)
    SERVICELEVELIND01 = _d("Service level target indicator", _RAW, _AWT, percent=True, zoz=1)
    SERVICELEVEL2 = _d("Service level (served contacts only)", _FOE, _AWT, percent=True, zoz=1)
    SERVICELEVEL2REP = _d("Service level (served contacts only, average of ratios)", _EOF, _AWT, percent=True, zoz=1)
    SERVICELEVELG = _d("Service level per agent group", _FOE, _AWTG, percent=True, zoz=1)
    SERVICERATIO = _d("Service ratio", _FOE, _CT, percent=True, zoz=1)
    SERVICERATIOREP = _d("Service ratio (average of ratios)", _EOF, _CT, percent=True, zoz=1)
    SERVICETIME = _d("Service time", _FOE, _CT, time=True)
    SERVICETIMEG = _d("Service time per agent group", _FOE, _CTG, time=True)
    SERVICETIMEREP = _d("Service time (average of ratios)", _EOF, _CT, time=True)
    SPEEDOFANSWER = _d("Speed of answer", _FOE, _CT, time=True)
    SPEEDOFANSWERG = _d("Speed of answer per agent group", _FOE, _CTG, time=True)
    SPEEDOFANSWERREP = _d("Speed of answer (average of ratios)", _EOF, _CT, time=True)
    SUMEXCESSTIMES = _d("Sum of excess times", _EXP, _AWT, time=True)
    SUMEXCESSTIMESABANDONED = _d("Sum of excess times of abandoned contacts", _EXP, _AWT, time=True)
    SUMEXCESSTIMESSERVED = _d("Sum of excess times of served contacts", _EXP, _AWT, time=True)
    SUMSERVICETIMES = _d("Sum of service times", _EXP, _CT, time=True)
    SUMWAITINGTIMES = _d("Sum of waiting times", _EXP, _CT, time=True)
    SUMSEWAITINGTIMES = _d("Sum of squared waiting times", _EXP, _CT, time=True)
    SUMWAITINGTIMESABANDONED = _d("Sum of waiting times of abandoned contacts", _EXP, _CT, time=True)
    SUMSEWAITINGTIMESABANDONED = _d("Sum of squared waiting times of abandoned contacts", _EXP, _CT, time=True)
    SUMWAITINGTIMESSERVED = _d("Sum of waiting times of served contacts", _EXP, _CT, time=True)
    SUMSEWAITINGTIMESSERVED = _d("Sum of squared waiting times of served contacts", _EXP, _CT, time=True)
    SUMWAITINGTIMESVQ = _d("Sum of waiting times in virtual queue", _EXP, _CT, time=True)
    SUMSEWAITINGTIMESVQ = _d("Sum of squared waiting times in virtual queue", _EXP, _CT, time=True)
    SUMWAITINGTIMESVQABANDONED = _d("Sum of waiting times in virtual queue of abandoned contacts", _EXP, _CT, time=True)
    SUMSEWAITINGTIMESVQABANDONED = _d("Sum of squared waiting times in virtual queue of abandoned contacts", _EXP, _CT, time=True)
    SUMWAITINGTIMESVQSERVED = _d("Sum of waiting times in virtual queue of served contacts", _EXP, _CT, time=True)
    SUMSEWAITINGTIMESVQSERVED = _d("Sum of squared waiting times in virtual queue of served contacts", _EXP, _CT, time=True)
    TIMETOABANDON = _d("Time to abandon", _FOE, _CT, time=True)
    TIMETOABANDONREP = _d("Time to abandon (average of ratios)", _EOF, _CT, time=True)
    WAITINGTIME = _d("Waiting time", _FOE, _CT, time=True)
    MSEWAITINGTIME = _d("Mean squared waiting time", _FOE, _CT, time=True)
    MSEWAITINGTIMEABANDONED = _d("Mean squared waiting time of abandoned contacts", _FOE, _CT, time=True)
    MSEWAITINGTIMESERVED = _d("Mean squared waiting time of served contacts", _FOE, _CT, time=True)
    WAITINGTIMEG = _d("Waiting time per agent group", _FOE, _CTG, time=True)
    WAITINGTIMEREP = _d("Waiting time (average of ratios)", _EOF, _CT, time=True)
    WAITINGTIMEVQ = _d("Waiting time in virtual queue", _FOE, _CT, time=True)
    MSEWAITINGTIMEVQ = _d("Mean squared waiting time in virtual queue", _FOE, _CT, time=True)
    WAITINGTIMEVQABANDONED = _d("Waiting time in virtual queue of abandoned contacts", _FOE, _CT, time=True)
    MSEWAITINGTIMEVQABANDONED = _d("Mean squared waiting time in virtual queue of abandoned contacts", _FOE, _CT, time=True)
    WAITINGTIMEVQABANDONEDREP = _d("Waiting time in virtual queue of abandoned contacts (average of ratios)", _EOF, _CT, time=True)
    WAITINGTIMEVQREP = _d("Waiting time in virtual queue (average of ratios)", _EOF, _CT, time=True)
    WAITINGTIMEVQSERVED = _d("Waiting time in virtual queue of served contacts", _FOE, _CT, time=True)
    MSEWAITINGTIMEVQSERVED = _d("Mean squared waiting time in virtual queue of served contacts", _FOE, _CT, time=True)
    WAITINGTIMEVQSERVEDREP = _d("Waiting time in virtual queue of served contacts (average of ratios)", _EOF, _CT, time=True)
    WAITINGTIMEWAIT = _d("Waiting time of delayed contacts", _FOE, _CT, time=True)
    WAITINGTIMEWAITREP = _d("Waiting time of delayed contacts (average of ratios)", _EOF, _CT, time=True)

    # ------------------------------------------------------------------
    # record fields
    # ------------------------------------------------------------------
    @property
    def description(self) -> str:
        return self.value.description

    @property
    def estimation(self) -> EstimationKind:
        return self.value.estimation

    @property
    def row_kind(self) -> RowKind:
        return self.value.row_kind

    @property
    def column_kind(self) -> ColumnKind:
        return self.value.column_kind

    @property
    def is_percentage(self) -> bool:
        return self.value.is_percentage

    @property
    def is_time(self) -> bool:
        return self.value.is_time

    @property
    def zero_over_zero(self) -> float:
        return self.value.zero_over_zero

    # ------------------------------------------------------------------
    # shape
    # ------------------------------------------------------------------
    def rows(self, info: CenterInfo) -> int:
        return self.row_kind.count(info)

    def columns(self, info: CenterInfo) -> int:
        return self.column_kind.count(info)

    def shape(self, info: CenterInfo):
        return self.rows(info), self.columns(info)

    def row_name(self, info: CenterInfo, row: int) -> str:
        return self.row_kind.name_of(info, row)

    def column_name(self, info: CenterInfo, column: int) -> str:
        return self.column_kind.name_of(info, column)

    def row_properties(self, info: CenterInfo, row: int) -> Mapping[str, str]:
        return self.row_kind.properties(info, row)

    def column_properties(self, info: CenterInfo, column: int) -> Mapping[str, str]:
        return self.column_kind.properties(info, column)

    @property
    def row_title(self) -> str:
        return self.row_kind.title

    @property
    def column_title(self) -> str:
        return self.column_kind.title

    # ------------------------------------------------------------------
    # registry
    # ------------------------------------------------------------------
    @classmethod
    def lookup(cls, name: str) -> "MeasureType":
        """Current or deprecated name, case-insensitive."""
        key = name.strip().upper()
        if key in cls.__members__:
            return cls.__members__[key]
        if key in _DEPRECATED:
            return cls.__members__[_DEPRECATED[key]]
        raise NotFoundError(f"[MeasureType] unknown performance measure: {name}")

    @classmethod
    def with_estimation(cls, kind: EstimationKind) -> List["MeasureType"]:
        return [m for m in cls if m.estimation == kind]

    def __repr__(self) -> str:
        return f"MeasureType.{self.name}"


_DEPRECATED: Dict[str, str] = {
    "ABANDONMENTRATE": "ABANDONMENTRATIO",
    "ABANDONMENTRATEAFTERAWT": "ABANDONMENTRATIOAFTERAWT",
    "ABANDONMENTRATEBEFOREAWT": "ABANDONMENTRATIOBEFOREAWT",
    "ABANDONMENTRATEREP": "ABANDONMENTRATIOREP",
    "ABANDONRATE": "ABANDONMENTRATIO",
    "ABANDONRATEAFTERAWT": "ABANDONMENTRATIOAFTERAWT",
    "ABANDONRATEBEFOREAWT": "ABANDONMENTRATIOBEFOREAWT",
    "ABANDONRATEREP": "ABANDONMENTRATIOREP",
    "BLOCKRATE": "BLOCKRATIO",
    "BLOCKRATEREP": "BLOCKRATIOREP",
    "PATIENCETIME": "TIMETOABANDON",
    "PATIENCETIMEREP": "TIMETOABANDONREP",
    "POSWAITRATIO": "DELAYRATIO",
    "POSWAITRATIOREP": "DELAYRATIOREP",
    "QOS": "SERVICELEVEL",
    "QOS2": "SERVICELEVEL2",
    "QOS2REP": "SERVICELEVEL2REP",
    "QOSREP": "SERVICELEVELREP",
    "RATEOFPOSWAIT": "RATEOFDELAY",
    "MSEREAL": "MSEWAITINGTIME",
    "MSEVQ": "MSEWAITINGTIMEVQ",
}
