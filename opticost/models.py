import enum


class ServiceKind(str, enum.Enum):
    FULL_INSTALLATION = "full_installation"
    ASSISTANCE = "assistance"


class TransportMode(str, enum.Enum):
    VAN = "van"                        # company-owned van
    FREIGHT_TRUCK = "freight_truck"    # articulated truck, customer unloads
    CRANE_TRUCK = "crane_truck"        # truck with on-board unloading crane


class AssistanceTransportMode(str, enum.Enum):
    COMPANY_VEHICLE = "company_vehicle"
    PUBLIC_TRANSPORT = "public_transport"


# Display names used by the PDF export and the sales description
TRANSPORT_MODE_NAMES = {
    TransportMode.VAN: "Company van",
    TransportMode.FREIGHT_TRUCK: "Freight truck",
    TransportMode.CRANE_TRUCK: "Crane truck",
}

SERVICE_KIND_NAMES = {
    ServiceKind.FULL_INSTALLATION: "Full turnkey installation",
    ServiceKind.ASSISTANCE: "Technical assistance",
}
