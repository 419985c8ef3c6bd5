"""
Request bodies accepted by the portal's resource endpoints.

Every field is optional here: the same serializer validates both
``POST`` (create) and ``PUT`` (partial update) bodies, and the upstream
adapters enforce which fields a create requires.  ``validated_data``
only contains the keys the caller actually sent, which the adapters rely
on to keep updates partial.  Free text is stripped of markup with
``bleach``.
"""
import bleach
from rest_framework import serializers


def clean_text(v):
    if v is None:
        return None
    return bleach.clean(v.strip(), tags=set(), strip=True)


def Text(max_length=None, **kw):
    return serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                 max_length=max_length, trim_whitespace=True, **kw)


def Int(**kw):
    return serializers.IntegerField(required=False, allow_null=True, **kw)


def Number(**kw):
    return serializers.FloatField(required=False, allow_null=True, **kw)


def Choice(choices, **kw):
    return serializers.ChoiceField(choices=choices, required=False, allow_null=True, **kw)


def Flag(**kw):
    return serializers.BooleanField(required=False, allow_null=True, **kw)


YES_NO = ['Yes', 'No']


class CleanTextSerializer(serializers.Serializer):
    def validate(self, attrs):
        return {k: clean_text(v) if isinstance(v, str) else v for k, v in attrs.items()}


class PatientSerializer(CleanTextSerializer):
    patientNo = Text(32)
    patientName = Text(100)
    patientType = Text(32)
    lastName = Text(100)
    adhaarID = Text(20)
    panCard = Text(20)
    phoneNo = Text(20)
    gender = Text(16)
    age = Int(min_value=0, max_value=150)
    address = Text(255)
    chiefComplaint = Text()
    description = Text()
    status = Text(16)
    registeredBy = Int()


class PatientListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=10)
    phone = serializers.CharField(required=False, allow_blank=True)


class StaffSerializer(CleanTextSerializer):
    roleId = Text(64)
    userName = Text(100)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    phoneNo = Text(20)
    emailId = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    doctorDepartmentId = Text(32)
    doctorQualification = Text(255)
    doctorType = Choice(['INHOUSE', 'VISITING'])
    doctorOPDCharge = Number(min_value=0)
    doctorSurgeryCharge = Number(min_value=0)
    opdConsultation = Choice(YES_NO)
    ipdVisit = Choice(YES_NO)
    otHandle = Choice(YES_NO)
    icuVisits = Choice(YES_NO)
    status = Choice(['Active', 'InActive'])
    createdBy = Int()

    def validate(self, attrs):
        password = attrs.get('password')
        attrs = super().validate(attrs)
        if password is not None:
            attrs['password'] = password
        return attrs


class DepartmentSerializer(CleanTextSerializer):
    name = Text(100)
    category = Text(64)
    description = Text()
    specialisationDetails = Text()
    noOfDoctors = Int(min_value=0)
    status = Choice(['active', 'inactive'])


class EmergencyBedSerializer(CleanTextSerializer):
    emergencyBedNo = Text(32)
    emergencyRoomNameNo = Text(64)
    emergencyRoomDescription = Text()
    chargesPerDay = Number(min_value=0)
    createdBy = Int()
    status = Choice(['active', 'inactive', 'occupied'])


class EmergencyBedSlotSerializer(CleanTextSerializer):
    emergencyBedId = Int(min_value=1)
    eSlotStartTime = Text(16)
    eSlotEndTime = Text(16)
    status = Choice(['Active', 'Inactive'])


class EmergencyAdmissionSerializer(CleanTextSerializer):
    doctorId = Int(min_value=1)
    patientId = Text(64)
    emergencyBedId = Int(min_value=1)
    emergencyAdmissionDate = Text(32)
    emergencyStatus = Choice(['Admitted', 'IPD', 'OT', 'ICU', 'Discharged', 'Movedout'])
    allocationFromDate = Text(32)
    allocationToDate = Text(32)
    numberOfDays = Int(min_value=0)
    diagnosis = Text()
    treatmentDetails = Text()
    patientCondition = Choice(['Critical', 'Stable'])
    priority = Choice(['Low', 'Medium', 'High', 'Critical'])
    transferToIPD = Choice(YES_NO)
    transferToOT = Choice(YES_NO)
    transferToICU = Choice(YES_NO)
    transferTo = Text(32)
    transferDetails = Text()
    admissionCreatedBy = Int()
    status = Choice(['Active', 'Inactive'])


class EmergencyAdmissionQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    emergencyStatus = serializers.CharField(required=False)
    patientId = serializers.CharField(required=False)
    doctorId = serializers.IntegerField(required=False)
    emergencyBedSlotId = serializers.IntegerField(required=False)


class VitalsSerializer(CleanTextSerializer):
    nurseId = Int(min_value=1)
    recordedDateTime = Text(40)
    heartRate = Int(min_value=0)
    bloodPressure = Text(16)
    temperature = Number()
    o2Saturation = Number(min_value=0, max_value=100)
    respiratoryRate = Int(min_value=0)
    pulseRate = Int(min_value=0)
    vitalsStatus = Text(32)
    vitalsRemarks = Text()
    vitalsCreatedBy = Int()
    status = Text(16)


class IcuBedSerializer(CleanTextSerializer):
    icuBedNo = Text(32)
    icuType = Text(64)
    icuRoomNameNo = Text(64)
    icuDescription = Text()
    isVentilatorAttached = serializers.BooleanField(required=False, allow_null=True)
    status = Text(16)


class RoomBedSerializer(CleanTextSerializer):
    bedNo = Text(32)
    roomNo = Text(32)
    roomCategory = Text(64)
    roomType = Text(64)
    chargesPerDay = Number(min_value=0)
    status = Text(16)
    createdBy = Text(32)


class OTRoomSerializer(CleanTextSerializer):
    otNo = Text(32)
    otType = Text(64)
    otName = Text(100)
    otDescription = Text()
    startTimeofDay = Text(8)
    endTimeofDay = Text(8)
    status = Choice(['active', 'inactive'])
    createdBy = Text(32)


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=10)
    status = serializers.CharField(required=False)
    otType = serializers.CharField(required=False)


class RoomAdmissionSerializer(CleanTextSerializer):
    patientId = Text(64)
    patientName = Text(100)
    age = Int(min_value=0, max_value=150)
    gender = Text(16)
    admissionDate = Text(32)
    roomType = Text(64)
    roomBedId = Int(min_value=1)
    bedNumber = Text(32)
    admittedBy = Text(100)
    doctorId = Int(min_value=1)
    diagnosis = Text()
    estimatedStay = Text(32)
    scheduleOT = Choice(YES_NO)
    status = Text(32)
    createdBy = Int()


class IcuAdmissionSerializer(CleanTextSerializer):
    patientId = Text(64)
    icuId = Int(min_value=1)
    icuBedId = Int(min_value=1)
    icuBedNo = Text(32)
    icuPatientStatus = Text(32)
    icuAllocationFromDate = Text(32)
    icuAllocationToDate = Text(32)
    diagnosis = Text()
    treatmentDetails = Text()
    patientCondition = Choice(['Critical', 'Stable'])
    onVentilator = Flag()
    icuAdmissionStatus = Text(32)
    createdBy = Int()


class OTSlotSerializer(CleanTextSerializer):
    otId = Text(16)
    otSlotNo = Text(16)
    slotStartTime = Text(8)
    slotEndTime = Text(8)
    status = Choice(['Active', 'Inactive'])


class OTSlotQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    otId = serializers.CharField(required=False)
    date = serializers.DateField(required=False, input_formats=['%Y-%m-%d'])


class OTAllocationSerializer(CleanTextSerializer):
    patientId = Text(64)
    roomAdmissionId = Int(min_value=1)
    patientAppointmentId = Int(min_value=1)
    emergencyBedSlotId = Int(min_value=1)
    otId = Int(min_value=1)
    surgeryId = Int(min_value=1)
    leadSurgeonId = Int(min_value=1)
    assistantDoctorId = Int(min_value=1)
    anaesthetistId = Int(min_value=1)
    nurseId = Int(min_value=1)
    otAllocationDate = Text(32)
    dateOfOperation = Text(32)
    duration = Int(min_value=0)
    otStartTime = Text(8)
    otEndTime = Text(8)
    otActualStartTime = Text(8)
    otActualEndTime = Text(8)
    operationDescription = Text()
    operationStatus = Choice(['Scheduled', 'InProgress', 'Completed', 'Cancelled', 'Postponed'])
    preOperationNotes = Text()
    postOperationNotes = Text()
    billId = Int(min_value=1)
    otSlotIds = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    status = Choice(['Active', 'InActive'])


class AppointmentSerializer(CleanTextSerializer):
    patientId = Text(64)
    doctorId = Int(min_value=1)
    appointmentDate = Text(32)
    appointmentTime = Text(8)
    appointmentStatus = Choice(['Waiting', 'Consulting', 'Completed'])
    consultationCharge = Number(min_value=0)
    diagnosis = Text()
    followUpDetails = Text()
    prescriptionsUrl = Text(500)
    toBeAdmitted = Flag()
    referToAnotherDoctor = Flag()
    referredDoctorId = Int(min_value=1)
    transferToIPDOTICU = Flag()
    transferTo = Choice(['IPD Room Admission', 'ICU', 'OT'])
    transferDetails = Text()
    billId = Int(min_value=1)
    status = Choice(['Active', 'InActive'])
    createdBy = Int()


class AppointmentQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=10)
    status = serializers.CharField(required=False)
    appointmentStatus = serializers.CharField(required=False)
    patientId = serializers.CharField(required=False)
    doctorId = serializers.IntegerField(required=False)
    appointmentDate = serializers.CharField(required=False)


class LabTestSerializer(CleanTextSerializer):
    testName = Text(100)
    testCategory = Text(64)
    description = Text()
    charges = Number(min_value=0)
    status = Choice(['active', 'inactive'])


class RoleSerializer(CleanTextSerializer):
    name = Text(64)
    description = Text()
    createdBy = Int()
